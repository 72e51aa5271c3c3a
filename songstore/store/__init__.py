"""Song catalog, fingerprint index and collection maintenance."""
