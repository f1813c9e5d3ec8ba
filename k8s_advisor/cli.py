import asyncio
import json
import sys
from typing import Optional

import click

from k8s_advisor.config.config import Config
from k8s_advisor.core.embedding.embedding_service import EmbeddingService
from k8s_advisor.core.llm.ai_provider import AIProvider
from k8s_advisor.core.recommender.factory import create_kubectl_client, create_resource_recommender
from k8s_advisor.core.vector.vector_db_service import VectorDBService
from k8s_advisor.utils.exceptions import ConfigError, K8sAdvisorError
from k8s_advisor.utils.logger import ComponentLogger

cli_logger = ComponentLogger("K8S_ADVISOR_CLI")


def _load_config(config_file: Optional[str], debug: bool = False) -> Config:
    overrides = Config.load_config(config_file) if config_file else {}
    if debug:
        overrides['DEBUG_MODE'] = True
    return Config(overrides)


async def _recommend(config: Config, intent: str) -> dict:
    kubectl = create_kubectl_client(config)
    recommender = create_resource_recommender(config, kubectl=kubectl)
    result = await recommender.find_best_solutions(intent, kubectl.explain_resource)
    return result.model_dump(by_alias=True, exclude_none=True)


async def _health(config: Config) -> dict:
    vector_db_config = config.vector_db_config
    embedding = EmbeddingService.from_config(config)
    ai_provider = AIProvider.from_config(config)

    collections = {}
    for key, name in vector_db_config['collections'].items():
        service = VectorDBService(collection_name=name, url=vector_db_config['url'], api_key=vector_db_config['api_key'])
        collections[key] = {
            "name": name,
            "reachable": await service.health_check(),
        }

    return {
        "vectorDb": {"url": vector_db_config['url'], "collections": collections},
        "embedding": embedding.get_status(),
        "llm": {
            "initialized": ai_provider.is_initialized(),
            "provider": ai_provider.provider,
            "model": ai_provider.model,
        },
    }


@click.group()
def main():
    """K8s Advisor: Kubernetes resource recommendations from deployment intents."""


@main.command()
@click.argument('intent')
@click.option('--config-file', 'config_file', help='Path to JSON configuration file')
@click.option('--debug', 'debug', is_flag=True, default=False, help='Log prompts and parsed responses')
def recommend(intent: str, config_file: Optional[str], debug: bool):
    """
    Recommend Kubernetes resources for INTENT and print the result as JSON.
    """
    try:
        config = _load_config(config_file, debug)
        cli_logger.log_structured(
            level="INFO",
            message="Starting recommendation",
            extra={"intent": intent, "config_file": config_file}
        )
        result = asyncio.run(_recommend(config, intent))
        click.echo(json.dumps(result, indent=2))
    except json.JSONDecodeError as e:
        cli_logger.log_structured(
            level="ERROR",
            message=f"Invalid JSON in configuration file: {e}",
            extra={"error": str(e)}
        )
        sys.exit(1)
    except ConfigError as e:
        cli_logger.log_structured(
            level="ERROR",
            message=f"Configuration error: {e}",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        sys.exit(1)
    except K8sAdvisorError as e:
        cli_logger.log_structured(
            level="ERROR",
            message=f"Recommendation failed: {e}",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        sys.exit(1)
    except Exception as e:
        cli_logger.log_structured(
            level="ERROR",
            message=f"An unexpected error occurred: {e}",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        sys.exit(1)


@main.command()
@click.option('--config-file', 'config_file', help='Path to JSON configuration file')
def health(config_file: Optional[str]):
    """Print vector DB, embedding and LLM status."""
    try:
        config = _load_config(config_file)
        status = asyncio.run(_health(config))
        click.echo(json.dumps(status, indent=2))
    except Exception as e:
        cli_logger.log_structured(
            level="ERROR",
            message=f"Health check failed: {e}",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
