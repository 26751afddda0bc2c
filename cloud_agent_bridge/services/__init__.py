"""Services: outbound cloud agent API client and error normalization."""
