"""Host adapters that feed engine keystrokes from UI toolkits."""
