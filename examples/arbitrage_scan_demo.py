"""
Arbitrage Scan Demo
===================

Builds a small SPY option chain from market-data records and runs the
price, volatility and put-call parity scans over it.
"""

import logging
from datetime import datetime

import numpy as np
import pandas as pd

from options_arbitrage import ArbitrageDetector, ArbitrageType, ScanConfig, price_option
from options_arbitrage.data import contracts_from_records
from options_arbitrage.monitoring import opportunities_to_frame, summarize_opportunities
from options_arbitrage.pricing import HistoricalVolatilityCalculator


def sample_chain(spot_price, as_of):
    """Records priced at 25% vol, with a few deliberate dislocations"""
    expiry = (pd.Timestamp(as_of.date()) + pd.DateOffset(months=2)).date()
    tau = (expiry - as_of.date()).days / 365.0

    # strike -> (call mispricing, put mispricing, quoted implied vol)
    dislocations = {
        560.0: (1.00, 1.00, 0.25),
        570.0: (1.12, 1.00, 0.25),
        580.0: (1.00, 0.85, 0.34),
        590.0: (1.00, 1.00, 0.25),
        600.0: (1.09, 1.00, 0.18),
    }

    records = []
    for strike, (call_factor, put_factor, iv) in dislocations.items():
        for is_call, factor in ((True, call_factor), (False, put_factor)):
            fair = price_option(spot_price, strike, tau, 0.05, 0.25, is_call).price
            last = round(fair * factor, 2)
            kind = 'C' if is_call else 'P'
            records.append({
                'ticker': f"O:SPY{expiry:%y%m%d}{kind}{int(strike * 1000):08d}",
                'underlying_ticker': 'SPY',
                'strike_price': strike,
                'expiration_date': expiry.isoformat(),
                'contract_type': 'call' if is_call else 'put',
                'bid': round(last * 0.98, 2),
                'ask': round(last * 1.02, 2),
                'last': last,
                'volume': 1500 if strike == 580.0 else 300,
                'open_interest': 9000 if strike == 580.0 else 2500,
                'implied_volatility': iv,
                'underlying_price': spot_price,
            })

    # One broken record to show how malformed input is reported
    records.append({'ticker': 'O:SPYBROKEN', 'strike_price': 575.0})
    return records


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    print("Options Arbitrage Scan Demo")
    print("=" * 80)

    as_of = datetime(2025, 1, 15, 16, 0)
    spot_price = 580.0

    # Historical volatility benchmark from a simulated price path
    rng = np.random.default_rng(2025)
    prices = pd.Series(spot_price * np.cumprod(1 + rng.normal(0, 0.016, 260)))
    historical_vol = HistoricalVolatilityCalculator().historical_volatility(prices, window=60)
    print(f"\nHistorical volatility (60d): {historical_vol:.1%}")

    skipped = []
    contracts = contracts_from_records(sample_chain(spot_price, as_of), skipped)
    print(f"Loaded {len(contracts)} contracts, dropped {len(skipped)} malformed records")

    detector = ArbitrageDetector(ScanConfig(historical_volatility=historical_vol))

    for arbitrage_type in ArbitrageType:
        report = detector.scan(arbitrage_type, contracts, as_of=as_of)
        summary = summarize_opportunities(report.opportunities)

        print(f"\n{arbitrage_type.value.upper()} SCAN")
        print("-" * 80)
        print(f"   Opportunities: {summary['total_opportunities']} "
              f"(high confidence: {summary['high_confidence']})")
        print(f"   Avg price difference: ${summary['avg_price_difference']:.2f}")
        print(f"   Max expected profit: ${summary['max_profit']:,.0f}")

        if report.opportunities:
            frame = opportunities_to_frame(report.opportunities)
            columns = ['contract_ticker', 'market_price', 'theoretical_price',
                       'percentage_difference', 'confidence']
            print(frame[columns].to_string(index=False, float_format=lambda x: f"{x:.3f}"))
            print(f"   Top idea: {report.opportunities[0].recommendation}")

        for skip in report.skipped:
            print(f"   Skipped {skip.contract_ticker}: {skip.reason}")

    print("\n" + "=" * 80)


if __name__ == "__main__":
    main()
