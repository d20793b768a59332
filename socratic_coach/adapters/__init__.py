"""Adapters — LLM providers, storage, and the HTTP surface."""
