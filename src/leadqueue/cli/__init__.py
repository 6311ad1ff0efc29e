"""leadq command line."""
