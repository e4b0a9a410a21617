"""Browser-free tests of the UI framework, run against an in-memory DOM."""
