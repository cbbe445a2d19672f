"""Core engine: fingerprinting, persisted step state, lifecycle, memoization, orchestration."""
