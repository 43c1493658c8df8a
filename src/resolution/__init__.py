"""Platform tags, variant selection, artifact resolution and cache paths."""
