"""describe-ingest: chunking of documents and caption transcripts for retrieval."""
