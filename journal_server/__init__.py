"""Journal summarization service: summary cache, consolidation and chronicle rollups."""
