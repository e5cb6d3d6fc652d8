"""
Outbound HTTP adapters for the third-party services: Judge0 code execution,
Gemini text generation and Google sign-in.
"""
