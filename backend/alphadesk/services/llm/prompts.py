"""
LLM Prompt Templates

Analysis prompt for one holding and the portfolio-wide health check prompt.

CRITICAL RULES (enforced in the prompt):
- LLM does NO math - all numbers come from the indicator engine
- Missing indicators are shown as "-", never as 0
- Answers come back in tagged sections ([SUMMARY] / [DETAIL] / [SIGNAL],
  [SCORE] / [RISK] / [COMMENT] / [SUGGESTION])
"""

from typing import Optional

from alphadesk.schemas.analysis import AssetClassification, AssetType, PortfolioHealthRequest
from alphadesk.schemas.indicators import TechnicalSnapshot

# =============================================================================
# ASSET TYPE
# =============================================================================

BOND_MARKERS = ("債", "BOND")
FUND_MARKERS = ("ETF", "基金", "FUND")
BOND_CATEGORIES = ("債券", "BOND")
STOCK_CATEGORIES = ("股票", "STOCK")


def detect_asset_type(symbol: str, name: str = "", category: Optional[str] = None) -> AssetType:
    """
    Classify a holding from its ticker, display name and category.

    Only holdings filed as stocks (or with no category at all) can be ETFs;
    any other non-bond category is treated as a stock.
    """
    upper_name = (name or "").upper()
    upper_category = (category or "").upper()
    if upper_category in BOND_CATEGORIES or any(m in upper_name for m in BOND_MARKERS):
        return AssetType.BOND
    if category is not None and upper_category not in STOCK_CATEGORIES:
        return AssetType.STOCK
    if symbol.startswith("00") or any(m in upper_name for m in FUND_MARKERS):
        return AssetType.ETF
    return AssetType.STOCK


# =============================================================================
# TECHNICAL SUMMARY
# =============================================================================


def format_price(value: Optional[float]) -> str:
    """Two decimals, or "-" when the value is not computable yet."""
    return "-" if value is None else f"{value:.2f}"


def format_technical_summary(snapshot: TechnicalSnapshot) -> list[str]:
    """Render the latest indicator readings, one line per indicator group."""
    return [
        f"Moving averages: MA20 {format_price(snapshot.ma20)} / "
        f"MA60 {format_price(snapshot.ma60)} / MA120 {format_price(snapshot.ma120)}",
        f"KD: K={format_price(snapshot.k)}, D={format_price(snapshot.d)}",
        f"MACD: DIF={format_price(snapshot.dif)}, Signal={format_price(snapshot.signal)}, "
        f"OSC={format_price(snapshot.osc)}",
    ]


# =============================================================================
# ANALYSIS PROMPT
# =============================================================================

STRATEGY_GUIDANCE = {
    AssetClassification.CORE: (
        "CORE holding (long-term, buy on weakness). "
        "(1) Price falling below MA60 or MA120 marks value emerging: SIGNAL ADD. "
        "(2) If fundamentals are unchanged, a falling price is a chance to accumulate in tranches. "
        "(3) Only consider reducing when the price is far above its averages or fundamentals deteriorate."
    ),
    AssetClassification.SATELLITE: (
        "SATELLITE holding (swing trade, follow momentum). "
        "(1) Price above MA20 with KD/MACD turning up means momentum is building: SIGNAL ADD. "
        "(2) Breaking below MA20 or heavy volume at highs means momentum is fading: "
        "enforce stops or take profit, SIGNAL REDUCE. "
        "(3) Do not hold a losing swing position long-term."
    ),
}

ANALYSIS_PROMPT_TEMPLATE = """Act as a professional equity analyst and write an in-depth analysis of one holding.

HOLDING:
- Symbol: {symbol}
- Name: {name}
- Asset type: {asset_type}
- Position role: {classification} (base every recommendation on this role)
{performance_line}- Last bar close ({data_date}): {last_close}
- Current real-time price: {current_price} (judge the action at this price)

TECHNICAL INDICATORS (all values pre-computed, do not recalculate):
{technical_lines}

STRATEGY RULES:
{strategy}

Weigh the current price against the technical support and resistance levels and give a
recommendation that fits the {classification} role.

Reply in exactly these sections, in this order, without code fences:

[SUMMARY]
(one or two sentences combining the position role with the current P/L)

[DETAIL]
(full report in Markdown: 1. current trend 2. key support / resistance 3. concrete actions for a {classification} holding)

[SIGNAL]
(a single word: ADD or REDUCE or HOLD)
"""


def format_analysis_prompt(
    symbol: str,
    snapshot: TechnicalSnapshot,
    classification: AssetClassification,
    asset_type: AssetType,
    name: Optional[str] = None,
    current_price: Optional[float] = None,
    performance_note: Optional[str] = None,
) -> str:
    """Format the analysis prompt from the latest indicator snapshot."""
    price_now = current_price if current_price is not None else snapshot.close
    technical_lines = "\n".join(f"- {line}" for line in format_technical_summary(snapshot))
    performance_line = f"- Performance: {performance_note}\n" if performance_note else ""

    return ANALYSIS_PROMPT_TEMPLATE.format(
        symbol=symbol,
        name=name or symbol,
        asset_type=asset_type.value,
        classification=classification.value,
        performance_line=performance_line,
        data_date=snapshot.date,
        last_close=format_price(snapshot.close),
        current_price=format_price(price_now),
        technical_lines=technical_lines,
        strategy=STRATEGY_GUIDANCE[classification],
    )


# =============================================================================
# PORTFOLIO HEALTH CHECK
# =============================================================================

TOP_HOLDINGS = 5

PORTFOLIO_HEALTH_PROMPT_TEMPLATE = """Act as Chief Investment Officer and risk manager.
Review the overall risk and health of the portfolio below.

PORTFOLIO:
- Total assets: {total_value}
- Total P/L: {total_pl} (ROI: {total_roi})
- Allocation: {allocation}
- Top {top_count} holdings (concentration risk): {top_holdings}

Reply in exactly these tagged sections, without code fences:

[SCORE]
(a single 0-100 score for diversification and allocation quality)

[RISK]
(one of: Low / Medium-Low / Medium / Medium-High / High)

[COMMENT]
(overall verdict under 200 words, covering risks and allocation advice; professional and objective)

[SUGGESTION]
(three concrete adjustments, one per line, e.g. "Add bonds to dampen volatility")
"""


def format_currency(value: float) -> str:
    return f"{value:,.0f}"


def format_percent(fraction: float) -> str:
    return f"{fraction * 100:.2f}%"


def format_portfolio_health_prompt(request: PortfolioHealthRequest) -> str:
    """Format the health check prompt; holdings are ranked by market value."""
    top = sorted(request.holdings, key=lambda h: h.market_value, reverse=True)[:TOP_HOLDINGS]
    top_holdings = ", ".join(
        f"{h.name or h.symbol}({h.symbol}): {format_percent(h.market_value / request.total_value)}"
        for h in top
    )
    allocation = ", ".join(
        f"{a.name} {format_percent(a.percentage)}" for a in request.allocation
    )

    return PORTFOLIO_HEALTH_PROMPT_TEMPLATE.format(
        total_value=format_currency(request.total_value),
        total_pl=format_currency(request.total_pl),
        total_roi=format_percent(request.total_roi),
        allocation=allocation or "-",
        top_count=TOP_HOLDINGS,
        top_holdings=top_holdings or "-",
    )
