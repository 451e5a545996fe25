"""Question routing and lexical retrieval for the driver assistant."""
