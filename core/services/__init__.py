"""Application services. Import from the subpackages directly."""
