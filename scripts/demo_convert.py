"""Console demo for the conversion pipeline.

Demonstrates:
 1. A first USD -> THB conversion (cache miss, live API call).
 2. A EUR -> JPY conversion.
 3. The USD -> THB call again, answered from the cache.
 4. Listing supported currencies and checking one of them.

NOTE: Hits the public Frankfurter API; this is a diagnostic, not a test.
"""

import asyncio

from fxconvert.core.logging import init_logging
from fxconvert.models.rates import ConversionRequest, ConversionSuccess
from fxconvert.services.currency_service import CurrencyService


def show(result) -> None:
    if isinstance(result, ConversionSuccess):
        data = result.data
        print(f"  Base: {data.base}")
        print(f"  Amount: {data.amount}")
        print(f"  Date: {data.date}")
        print(f"  Rates: {data.rates}")
    else:
        print(f"  Error ({result.error.type}): {result.error.message}")


async def run():
    svc = CurrencyService(("USD", "EUR", "JPY", "THB"))

    print("Example 1: USD to THB")
    show(await svc.convert(ConversionRequest(from_="USD", to="THB", amount=100)))

    print("\nExample 2: EUR to JPY")
    show(await svc.convert(ConversionRequest(from_="EUR", to="JPY", amount=50)))

    print("\nExample 3: cached call (USD to THB again)")
    show(await svc.convert(ConversionRequest(from_="USD", to="THB", amount=100)))

    print("\nExample 4: supported currencies")
    print(f"  Supported: {', '.join(svc.get_supported_currencies())}")

    print("\nExample 5: currency validation")
    code = "USD"
    print(f"  {code} supported: {svc.is_supported(code)}")


if __name__ == "__main__":
    init_logging(debug=False, json_output=False)
    asyncio.run(run())
