"""
Pydantic datamodels used by the bridge runtime.

- channel_models: MethodCall + CallResult + ChannelError + HTTP envelopes
"""
