"""
Storage abstractions for the bridge runtime.

Includes:
- CallLogStore: append-only JSONL log of dispatched method calls
"""
