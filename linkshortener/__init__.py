"""linkshortener: base62 URL shortener backed by Redis and served by AWS Lambda."""
