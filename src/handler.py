import json
from .rag.prompt import build_analysis_prompt
from .llm.bedrock_client import call_llm, retrieve_and_generate
from .utils.http import api_response, is_proxy_event, parse_event_body
from .utils.logger import logger
from .utils.validation import is_valid_aws_region


class AnalysisRequestError(ValueError):
    """Raised when the analysis request is missing or has invalid fields."""


def _validate(body):
    if not body.get("companyName") or not body.get("affect"):
        raise AnalysisRequestError("companyName and affect are required in the request")
    if not body.get("bedrockRegion"):
        raise AnalysisRequestError("bedrockRegion is required in the request")
    if not is_valid_aws_region(body["bedrockRegion"]):
        raise AnalysisRequestError("Invalid AWS region format")


def _token_usage(input_tokens, output_tokens):
    input_tokens = input_tokens or 0
    output_tokens = output_tokens or 0
    return {
        "inputTokens": input_tokens,
        "outputTokens": output_tokens,
        "totalTokens": input_tokens + output_tokens,
    }


def analyze(body):
    """Run the business-factor analysis and shape the result."""
    _validate(body)

    company_name = body["companyName"]
    affect = body["affect"]
    region = body["bedrockRegion"]
    stock_symbol = body.get("stockSymbol") or None
    knowledge_base_id = (body.get("knowledgeBaseId") or "").strip()

    prompt = build_analysis_prompt(company_name, affect, stock_symbol)

    if knowledge_base_id:
        logger.info(f"Using knowledge base: {knowledge_base_id}")
        response = retrieve_and_generate(prompt, knowledge_base_id, region)
        citations = response.get("citations", [])
        return {
            "message": response["output"]["text"],
            "companyQueried": company_name,
            "stockSymbol": stock_symbol,
            "factorAnalyzed": affect,
            "retrievalMetadata": {
                "totalRetrieved": len(citations),
                "knowledgeBasesUsed": [knowledge_base_id],
                "bedrockRegion": region,
                "usedKnowledgeBase": True,
                "citations": citations,
                "tokenUsage": _token_usage(
                    response.get("inputTokenUsage"), response.get("outputTokenUsage")
                ),
            },
        }

    logger.info("No knowledge base given, invoking model directly")
    answer, usage = call_llm(prompt, region)
    return {
        "message": answer,
        "companyQueried": company_name,
        "stockSymbol": stock_symbol,
        "factorAnalyzed": affect,
        "retrievalMetadata": {
            "totalRetrieved": 0,
            "knowledgeBasesUsed": [],
            "bedrockRegion": region,
            "usedKnowledgeBase": False,
            "citations": [],
            "tokenUsage": _token_usage(usage.get("input_tokens"), usage.get("output_tokens")),
        },
    }


def lambda_handler(event, context):
    """
    Analyze how an external factor affects a company.

    API Gateway events get a proxy response (400 for invalid requests,
    500 otherwise). Direct invocations get the bare result and errors
    propagate to the caller.
    """
    logger.info(json.dumps(event, default=str))
    proxied = is_proxy_event(event)

    try:
        body = parse_event_body(event)
        result = analyze(body)
    except Exception as e:
        logger.error(f"Error processing request: {e}")
        if not proxied:
            raise
        status_code = 400 if isinstance(e, ValueError) else 500
        return api_response(status_code, {
            "message": "Error processing request",
            "error": str(e),
        })

    if proxied:
        return api_response(200, result)
    return result
