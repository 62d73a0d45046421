"""Host adapters: interfaces plus the SiYuan and clipboard implementations."""
