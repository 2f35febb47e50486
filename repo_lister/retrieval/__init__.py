"""GitHub REST transport and repository listing."""
