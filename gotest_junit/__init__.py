"""Convert `go test -v` transcripts into JUnit XML reports."""
