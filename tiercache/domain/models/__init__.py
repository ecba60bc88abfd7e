"""Domain models: keys, expiration policies, envelopes and errors."""
