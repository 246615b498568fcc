"""
Knowledge Base Sync Trigger
---------------------------
Starts an ingestion job for every data source of a Bedrock knowledge base.

A failure to start one data source is logged and reported, the remaining
data sources are still synced.
"""

import boto3
import json
from datetime import datetime, timezone
from typing import Any

from ..config import AWS_REGION
from ..utils.http import api_response, parse_event_body
from ..utils.logger import logger

# Lazy initialization
_bedrock_agent = None


def _get_bedrock_agent_client():
    """Lazily initialize Bedrock Agent client."""
    global _bedrock_agent
    if _bedrock_agent is None:
        logger.info(f"Initializing Bedrock Agent client in region: {AWS_REGION}")
        _bedrock_agent = boto3.client("bedrock-agent", region_name=AWS_REGION)
    return _bedrock_agent


def format_timestamp(moment: datetime) -> str:
    """MM/DD/YYYY HH:MM:SS"""
    return moment.strftime("%m/%d/%Y %H:%M:%S")


def list_data_source_ids(client, knowledge_base_id: str) -> list:
    paginator = client.get_paginator("list_data_sources")
    ids = []
    for page in paginator.paginate(knowledgeBaseId=knowledge_base_id):
        ids.extend(source["dataSourceId"] for source in page.get("dataSourceSummaries", []))
    return ids


def start_sync(client, knowledge_base_id: str) -> dict:
    """Start one ingestion job per data source; returns started and failed ids."""
    started, failed = [], []

    for data_source_id in list_data_source_ids(client, knowledge_base_id):
        try:
            response = client.start_ingestion_job(
                knowledgeBaseId=knowledge_base_id,
                dataSourceId=data_source_id
            )
        except Exception as e:
            logger.error(f"Error syncing data source {data_source_id}: {e}")
            failed.append({"dataSourceId": data_source_id, "error": str(e)})
            continue

        job = response.get("ingestionJob", {})
        logger.info(f"Started sync for data source: {data_source_id} (job {job.get('ingestionJobId')})")
        started.append({
            "dataSourceId": data_source_id,
            "ingestionJobId": job.get("ingestionJobId"),
            "status": job.get("status"),
        })

    return {"ingestionJobs": started, "failedDataSources": failed}


def lambda_handler(event: dict, context: Any) -> dict:
    """
    Trigger a knowledge base sync.

    Event:
        {"knowledgeBaseId": "KB123"}
    """
    logger.info(f"Received event: {json.dumps(event, default=str)}")

    try:
        body = parse_event_body(event)
    except ValueError as e:
        return api_response(400, {"message": "Error parsing request body", "error": str(e)})

    knowledge_base_id = body.get("knowledgeBaseId")
    if not knowledge_base_id:
        return api_response(400, {
            "message": "Error initiating Knowledge Base sync",
            "error": "Knowledge Base ID is required",
        })

    now = datetime.now(timezone.utc)

    try:
        jobs = start_sync(_get_bedrock_agent_client(), knowledge_base_id)
    except Exception as e:
        logger.error(f"Error listing data sources for {knowledge_base_id}: {e}")
        return api_response(500, {
            "message": "Error initiating Knowledge Base sync",
            "error": str(e),
        })

    return api_response(200, {
        "message": "Knowledge Base sync initiated",
        "knowledgeBaseId": knowledge_base_id,
        "syncStartTime": format_timestamp(now),
        "isoTimestamp": now.isoformat(),
        **jobs,
    })
