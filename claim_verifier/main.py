"""Main script for verifying claims from the terminal."""

import asyncio
import logging

from .domain.models.claim import Claim
from .infrastructure.dependencies import get_service_container


async def main():
    """Run the claim verifier."""
    logging.basicConfig(level=logging.WARNING)
    print("Claim Verifier - evidence-backed claim checking")
    print("-----------------------------------------------")

    container = get_service_container()
    service = await container.get_verification_service()

    try:
        while True:
            text = input("\nEnter a claim to verify (or 'quit' to exit): ")
            if text.lower() in ('quit', 'exit', 'q'):
                break
            if not text.strip():
                continue

            print("\nVerifying...")
            result = await service.verify(Claim(text=text))

            print("\nResults:")
            print(f"Status: {result.status.value}{' (cached)' if result.cached else ''}")
            print(f"Confidence: {result.confidence}/100")
            print(f"Freshness: {result.freshness.value} - {result.freshness_reason}")
            if result.data_date:
                print(f"Data date: {result.data_date}")
            if result.requires_manual_review:
                print("Manual review required")
            print(f"\nSummary: {result.summary}")

            if result.sources:
                print("\nSources:")
                for i, source in enumerate(result.sources, 1):
                    print(f"{i}. {source.title} - {source.url}")

    finally:
        # Clean up
        await container.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
