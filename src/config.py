import os

AWS_REGION = os.environ.get("AWS_REGION", "us-east-1")
ENVIRONMENT = os.environ.get("ENVIRONMENT", "production")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Direct model invocation (no knowledge base)
LLM_MODEL = os.environ.get("LLM_MODEL", "anthropic.claude-3-5-sonnet-20241022-v2:0")
LLM_MAX_TOKENS = int(os.environ.get("LLM_MAX_TOKENS", "2048"))
LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.7"))

# Model used by retrieve_and_generate against a knowledge base
KB_MODEL_ID = os.environ.get("KB_MODEL_ID", "anthropic.claude-3-5-sonnet-20241022-v2:0")
