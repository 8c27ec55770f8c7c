"""Link resolution, slug caching and directory traversal."""
