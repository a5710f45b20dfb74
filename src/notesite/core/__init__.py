"""Core rendering pipeline: resolution, Markdown transforms, build orchestration."""
