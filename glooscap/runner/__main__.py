"""Entry point for the translation runner container."""

import argparse
import asyncio
import sys

from glooscap.catalog.models import TranslationJobState, TranslationJobStatus
from glooscap.core.config import Settings
from glooscap.core.errors import ConfigurationError
from glooscap.core.logging import configure_logging, get_logger
from glooscap.inference.client import InferenceConfig, RemoteInferenceClient
from glooscap.runner.runner import TranslationRunner
from glooscap.wiki.outline import OutlineClient, OutlineConfig

logger = get_logger().bind(module="runner_main")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_NOT_IMPLEMENTED = 3


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse runner arguments (the job dispatcher passes the first five)."""
    parser = argparse.ArgumentParser(description="Translate or publish one wiki page")
    parser.add_argument("--job-id", required=True, help="Logical translation job name")
    parser.add_argument("--page-id", required=True, help="Source page ID")
    parser.add_argument("--target", default="", help="Source target (namespace/name)")
    parser.add_argument("--language", default="", help="Target language code")
    parser.add_argument(
        "--vllm-url",
        default="",
        help="Inference backend address (or use INFERENCE_ADDRESS env)",
    )
    parser.add_argument("--page-title", default=None, help="Source page title")
    parser.add_argument(
        "--collection-id", default=None, help="Collection for the draft page"
    )
    parser.add_argument(
        "--publish-page-id",
        default=None,
        help="Publish this approved draft page instead of translating",
    )
    args = parser.parse_args(argv)
    if not args.publish_page_id and not args.language:
        parser.error("--language is required unless --publish-page-id is given")
    return args


def exit_code_for(status: TranslationJobStatus) -> int:
    """Map a final job status to a process exit code."""
    if status.state is not TranslationJobState.FAILED:
        return EXIT_OK
    if any(c.reason == "BackendNotImplemented" for c in status.conditions):
        return EXIT_NOT_IMPLEMENTED
    return EXIT_FAILED


async def run(args: argparse.Namespace, settings: Settings) -> int:
    """Build the collaborators, run the job and print the final status."""
    try:
        inference: RemoteInferenceClient | None = None
        if not args.publish_page_id:
            inference = RemoteInferenceClient(
                InferenceConfig(
                    address=args.vllm_url or settings.INFERENCE_ADDRESS,
                    client_name=settings.INFERENCE_CLIENT_NAME,
                    namespace=settings.NAMESPACE,
                    timeout=settings.INFERENCE_TIMEOUT,
                )
            )
        wiki = OutlineClient(
            OutlineConfig(
                base_url=settings.WIKI_BASE_URL,
                token=settings.WIKI_TOKEN,
                timeout=settings.WIKI_TIMEOUT,
                insecure_skip_tls_verify=settings.WIKI_INSECURE_SKIP_TLS_VERIFY,
            )
        )
    except ConfigurationError as e:
        logger.error("runner_configuration_invalid", error=str(e))
        return EXIT_CONFIG

    runner = TranslationRunner(wiki, inference)
    async with wiki:
        if args.publish_page_id:
            status = await runner.publish_draft(args.job_id, args.publish_page_id)
        else:
            status = await runner.run(
                job_id=args.job_id,
                page_id=args.page_id,
                language=args.language,
                page_title=args.page_title,
                collection_id=args.collection_id,
                source_wiki_uri=wiki.base_url,
            )

    print(status.model_dump_json())
    return exit_code_for(status)


def main(argv: list[str] | None = None) -> int:
    """Run the translation runner."""
    settings = Settings()
    configure_logging(testing=not settings.JSON_LOGS, level=settings.LOG_LEVEL)
    args = parse_args(argv)
    logger.info("runner_starting", job_id=args.job_id, target=args.target)
    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
