"""Ingestion pipeline: tokenizers, chunkers, prosody analysis and CLI."""
