"""Writing HTTP responses to WACZ archives and reading them back."""