"""Rating and catalog stores built fresh from a loaded dataset."""
