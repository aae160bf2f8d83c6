"""Core deployment pipeline: ordering, nonce tracking, signing, orchestration."""
