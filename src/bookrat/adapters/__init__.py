"""Host adapters for the reader core."""
