"""
dashlight: car dashboard warning-light analysis service.

An uploaded dashboard photo and/or question is validated by content and
forwarded, with a fixed mechanic instruction, to a Gemini model.
"""
