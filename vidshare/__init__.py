"""vidshare - video sharing API."""
