"""GitHunter: GitHub profile aggregation, caching, and asynchronous scoring."""
