"""HTTP API for the StackStudy forum."""
