"""Transport layer: request building, retrying execution and response decoding."""
