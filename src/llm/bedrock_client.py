import boto3
import json
from ..config import KB_MODEL_ID, LLM_MAX_TOKENS, LLM_MODEL, LLM_TEMPERATURE
from ..utils.logger import logger

# Lazy initialization, one client per (service, region)
_clients = {}

def _get_client(service, region):
    """Lazily initialize a Bedrock client for a region."""
    key = (service, region)
    if key not in _clients:
        logger.info(f"Initializing {service} client in region: {region}")
        _clients[key] = boto3.client(service, region_name=region)
    return _clients[key]

def call_llm(prompt, region):
    """Invoke the text model directly. Returns (text, usage dict)."""
    logger.info(f"Calling LLM model: {LLM_MODEL}")

    body = json.dumps({
        "anthropic_version": "bedrock-2023-05-31",
        "max_tokens": LLM_MAX_TOKENS,
        "temperature": LLM_TEMPERATURE,
        "messages": [
            {
                "role": "user",
                "content": prompt
            }
        ]
    })

    try:
        bedrock = _get_client("bedrock-runtime", region)
        response = bedrock.invoke_model(
            modelId=LLM_MODEL,
            contentType="application/json",
            accept="application/json",
            body=body
        )

        result = json.loads(response["body"].read().decode())
        return result["content"][0]["text"], result.get("usage", {})
    except Exception as e:
        logger.error(f"Bedrock LLM error: {e}")
        raise

def retrieve_and_generate(prompt, knowledge_base_id, region):
    """Answer the prompt from a Bedrock knowledge base."""
    model_arn = f"arn:aws:bedrock:{region}::foundation-model/{KB_MODEL_ID}"
    logger.info(f"Querying knowledge base {knowledge_base_id} with model {model_arn}")

    try:
        agent = _get_client("bedrock-agent-runtime", region)
        return agent.retrieve_and_generate(
            input={"text": prompt},
            retrieveAndGenerateConfiguration={
                "type": "KNOWLEDGE_BASE",
                "knowledgeBaseConfiguration": {
                    "knowledgeBaseId": knowledge_base_id,
                    "modelArn": model_arn
                }
            }
        )
    except Exception as e:
        logger.error(f"Knowledge base error: {e}")
        raise
