"""Content loading (Markdown/MDX posts with front matter)."""
