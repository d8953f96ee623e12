"""Tests for the AI analysis layer: prompt, parsing, client fallback and service."""

from unittest.mock import AsyncMock

import pytest

from alphadesk.schemas.analysis import (
    AllocationSlice,
    AnalysisRequest,
    AnalysisSignal,
    AssetClassification,
    AssetType,
    HoldingValue,
    PortfolioHealthRequest,
)
from alphadesk.schemas.indicators import TechnicalSnapshot
from alphadesk.schemas.market import Bar, ChartRange, HistoryResult
from alphadesk.services.base import DataNotFoundError, ExternalAPIError
from alphadesk.services.llm import (
    AnalysisService,
    GeminiClient,
    LLMConfig,
    LLMNotConfiguredError,
    LLMResponse,
    PortfolioHealthService,
    parse_analysis_response,
    parse_health_check_response,
)
from alphadesk.services.llm.prompts import (
    detect_asset_type,
    format_analysis_prompt,
    format_portfolio_health_prompt,
    format_price,
    format_technical_summary,
)

SAMPLE_ANSWER = """[SUMMARY]
**Core holding** still above `MA120`,
trend intact.

[DETAIL]
## Trend
Price holds above MA60.

[SIGNAL]
add
"""


class TestParseAnalysisResponse:
    """Tests for splitting the LLM answer into sections."""

    def test_all_sections(self) -> None:
        """Summary is cleaned, detail kept verbatim, signal upper-cased."""
        parsed = parse_analysis_response(SAMPLE_ANSWER)

        assert parsed.summary == "Core holding still above MA120, trend intact."
        assert parsed.detail == "## Trend\nPrice holds above MA60."
        assert parsed.signal == AnalysisSignal.ADD

    def test_missing_sections_fall_back(self) -> None:
        """No tags: generic summary, whole text as detail, HOLD."""
        text = "The model ignored the format."

        parsed = parse_analysis_response(text)

        assert parsed.summary == "Analysis complete"
        assert parsed.detail == text
        assert parsed.signal == AnalysisSignal.HOLD

    def test_unknown_signal_defaults_to_hold(self) -> None:
        """Only ADD / REDUCE / HOLD are accepted."""
        parsed = parse_analysis_response("[SUMMARY] ok [DETAIL] fine [SIGNAL] SELL")

        assert parsed.signal == AnalysisSignal.HOLD
        assert parsed.summary == "ok"
        assert parsed.detail == "fine"

    def test_reduce_signal(self) -> None:
        """Tags are matched case-insensitively."""
        parsed = parse_analysis_response("[summary]\nweak\n[signal] Reduce")

        assert parsed.signal == AnalysisSignal.REDUCE
        assert parsed.summary == "weak"


class TestPrompts:
    """Tests for prompt construction."""

    @pytest.mark.parametrize(
        "symbol, name, category, expected",
        [
            ("BND", "Total Bond ETF", None, AssetType.BOND),
            ("00679B.TWO", "元大美債20年", "股票", AssetType.BOND),
            ("IEF", "Treasury", "債券", AssetType.BOND),
            ("0050.TW", "元大台灣50", "股票", AssetType.ETF),
            ("VT", "Vanguard Total World ETF", None, AssetType.ETF),
            ("2330.TW", "台積電", "股票", AssetType.STOCK),
            ("0056.TW", "元大高股息ETF", "其他", AssetType.STOCK),
            ("00878.TW", "國泰永續高股息", "STOCK", AssetType.ETF),
        ],
    )
    def test_detect_asset_type(
        self, symbol: str, name: str, category: str, expected: AssetType
    ) -> None:
        """Bond markers win; only stock-category (or uncategorized) holdings can be ETFs."""
        assert detect_asset_type(symbol, name, category) == expected

    def test_format_price_keeps_none_distinct_from_zero(self) -> None:
        """None renders as '-', zero as 0.00."""
        assert format_price(None) == "-"
        assert format_price(0.0) == "0.00"
        assert format_price(12.345) == "12.35"

    def test_technical_summary_uses_dash_for_missing(self) -> None:
        """Indicators still warming up show '-'."""
        snapshot = TechnicalSnapshot(date="2024-05-01", close=50.0, ma20=48.0, k=70.1234)

        lines = format_technical_summary(snapshot)

        assert lines[0] == "Moving averages: MA20 48.00 / MA60 - / MA120 -"
        assert lines[1] == "KD: K=70.12, D=-"
        assert lines[2] == "MACD: DIF=-, Signal=-, OSC=-"

    def test_analysis_prompt_contents(self) -> None:
        """Prompt carries the holding, prices, indicators and strategy."""
        snapshot = TechnicalSnapshot(date="2024-05-01", close=50.0, ma20=48.0, osc=-0.5)

        prompt = format_analysis_prompt(
            symbol="2330.TW",
            snapshot=snapshot,
            classification=AssetClassification.SATELLITE,
            asset_type=AssetType.STOCK,
            name="TSMC",
            current_price=51.2,
            performance_note="P/L +1,200 (ROI 4.00%)",
        )

        assert "2330.TW" in prompt
        assert "TSMC" in prompt
        assert "Last bar close (2024-05-01): 50.00" in prompt
        assert "Current real-time price: 51.20" in prompt
        assert "OSC=-0.50" in prompt
        assert "SATELLITE holding" in prompt
        assert "P/L +1,200 (ROI 4.00%)" in prompt
        assert "[SIGNAL]" in prompt

    def test_analysis_prompt_falls_back_to_close(self) -> None:
        """Without a live price the last close is used."""
        snapshot = TechnicalSnapshot(date="2024-05-01", close=50.0)

        prompt = format_analysis_prompt(
            symbol="BND",
            snapshot=snapshot,
            classification=AssetClassification.CORE,
            asset_type=AssetType.BOND,
        )

        assert "Current real-time price: 50.00" in prompt
        assert "Performance" not in prompt
        assert "CORE holding" in prompt


class TestGeminiClient:
    """Tests for model fallback in the Gemini client."""

    def _client(self, **overrides) -> GeminiClient:
        config = LLMConfig(
            api_key="test-key",
            model="gemini-2.5-pro",
            fallback_models=["gemini-3-flash-preview", "gemini-2.5-pro", "gemini-2.5-flash"],
        )
        for key, value in overrides.items():
            setattr(config, key, value)
        return GeminiClient(config)

    def test_model_order_puts_preferred_first_without_duplicates(self) -> None:
        """Preferred model first, fallbacks after, each once."""
        assert self._client().model_order() == [
            "gemini-2.5-pro",
            "gemini-3-flash-preview",
            "gemini-2.5-flash",
        ]

    async def test_generate_falls_back_to_next_model(self) -> None:
        """A failing or empty model hands over to the next one."""
        client = self._client()
        client._generate_with = AsyncMock(side_effect=[RuntimeError("quota"), "", "answer"])

        response = await client.generate("prompt")

        assert response == LLMResponse(content="answer", model="gemini-2.5-flash")
        assert client._generate_with.await_count == 3

    async def test_generate_all_models_fail(self) -> None:
        """Every failure is reported in the error details."""
        client = self._client()
        client._generate_with = AsyncMock(side_effect=RuntimeError("down"))

        with pytest.raises(ExternalAPIError) as exc_info:
            await client.generate("prompt")

        assert set(exc_info.value.details) == set(client.model_order())

    async def test_generate_without_key(self) -> None:
        """No API key is a configuration error, not a network error."""
        client = self._client(api_key=None)

        with pytest.raises(LLMNotConfiguredError):
            await client.generate("prompt")
        assert await client.health_check() is False


class TestAnalysisService:
    """Tests for the end-to-end analysis flow with a fake LLM."""

    @pytest.fixture
    def llm_client(self) -> AsyncMock:
        client = AsyncMock(spec=GeminiClient)
        client.generate.return_value = LLMResponse(content=SAMPLE_ANSWER, model="gemini-2.5-flash")
        return client

    async def test_execute_with_supplied_bars(
        self, llm_client: AsyncMock, long_series: list[Bar]
    ) -> None:
        """Supplied bars skip the fetch; the snapshot is the last bar."""
        data_service = AsyncMock()
        service = AnalysisService(llm_client=llm_client, data_service=data_service)

        analysis = await service.execute(
            AnalysisRequest(
                symbol="0050.TW",
                name="元大台灣50",
                classification=AssetClassification.SATELLITE,
                bars=long_series,
                current_price=123.4,
            )
        )

        data_service.execute.assert_not_awaited()
        assert analysis.signal == AnalysisSignal.ADD
        assert analysis.asset_type == AssetType.ETF
        assert analysis.model == "gemini-2.5-flash"
        assert analysis.data_date == long_series[-1].date
        assert analysis.snapshot.ma120 is not None

        prompt = llm_client.generate.await_args.args[0]
        assert "Current real-time price: 123.40" in prompt
        assert "SATELLITE holding" in prompt

    async def test_execute_fetches_history_when_no_bars(
        self, llm_client: AsyncMock, long_series: list[Bar]
    ) -> None:
        """History and live price come from the data service."""
        data_service = AsyncMock()
        data_service.execute.return_value = HistoryResult(
            symbol="BND",
            chart_range=ChartRange.DAILY_1Y,
            bars=long_series,
            live_price=77.7,
        )
        service = AnalysisService(llm_client=llm_client, data_service=data_service)

        analysis = await service.execute(
            AnalysisRequest(symbol="BND", chart_range=ChartRange.DAILY_1Y)
        )

        history_request = data_service.execute.await_args.args[0]
        assert history_request.chart_range == ChartRange.DAILY_1Y
        assert history_request.include_live_price is True
        assert analysis.symbol == "BND"
        assert "Current real-time price: 77.70" in llm_client.generate.await_args.args[0]

    async def test_execute_with_empty_history(self, llm_client: AsyncMock) -> None:
        """An empty series cannot be analyzed."""
        data_service = AsyncMock()
        data_service.execute.return_value = HistoryResult(
            symbol="BND", chart_range=ChartRange.WEEKLY_5Y, bars=[]
        )
        service = AnalysisService(llm_client=llm_client, data_service=data_service)

        with pytest.raises(DataNotFoundError):
            await service.execute(AnalysisRequest(symbol="BND"))
        llm_client.generate.assert_not_awaited()


HEALTH_ANSWER = """[SCORE]
72

[RISK]
Medium-High

[COMMENT]
Heavy in one semiconductor name;
bonds are thin.

[SUGGESTION]
Trim the largest position

  Add short-duration bonds
Keep a cash buffer
"""


class TestPortfolioHealth:
    """Tests for the portfolio health check."""

    @pytest.fixture
    def request_data(self) -> PortfolioHealthRequest:
        holdings = [
            HoldingValue(symbol=f"H{i}.TW", name=f"Holding {i}", market_value=value)
            for i, value in enumerate([50_000, 400_000, 100_000, 30_000, 200_000, 20_000])
        ]
        return PortfolioHealthRequest(
            total_value=1_000_000,
            total_pl=85_000,
            total_roi=0.085,
            allocation=[
                AllocationSlice(name="Stocks", percentage=0.6),
                AllocationSlice(name="Bonds", percentage=0.4),
            ],
            holdings=holdings,
        )

    def test_parse_all_tags(self) -> None:
        """Score, first risk line, comment block and non-blank suggestion lines."""
        parsed = parse_health_check_response(HEALTH_ANSWER)

        assert parsed.score == 72
        assert parsed.risk == "Medium-High"
        assert parsed.comment == "Heavy in one semiconductor name;\nbonds are thin."
        assert parsed.suggestions == [
            "Trim the largest position",
            "Add short-duration bonds",
            "Keep a cash buffer",
        ]

    def test_parse_defaults(self) -> None:
        """An answer without tags falls back on every field."""
        parsed = parse_health_check_response("The model rambled.")

        assert parsed.score == 0
        assert parsed.risk == "Unknown"
        assert parsed.comment == "Could not parse the review"
        assert parsed.suggestions == []

    def test_parse_non_numeric_score(self) -> None:
        """A worded score is unreadable and counts as 0."""
        parsed = parse_health_check_response("[score] high\n[risk] Low\n[comment] fine")

        assert parsed.score == 0
        assert parsed.risk == "Low"
        assert parsed.comment == "fine"
        assert parsed.suggestions == []

    def test_prompt_contents(self, request_data: PortfolioHealthRequest) -> None:
        """Totals, allocation and the five largest holdings reach the prompt."""
        prompt = format_portfolio_health_prompt(request_data)

        assert "Total assets: 1,000,000" in prompt
        assert "Total P/L: 85,000 (ROI: 8.50%)" in prompt
        assert "Allocation: Stocks 60.00%, Bonds 40.00%" in prompt
        assert "Holding 1(H1.TW): 40.00%, Holding 4(H4.TW): 20.00%" in prompt
        assert "H5.TW" not in prompt
        assert "[SUGGESTION]" in prompt

    async def test_service_parses_llm_answer(self, request_data: PortfolioHealthRequest) -> None:
        """The service reuses the Gemini client and reports the model used."""
        client = AsyncMock(spec=GeminiClient)
        client.generate.return_value = LLMResponse(content=HEALTH_ANSWER, model="gemini-2.5-pro")

        health = await PortfolioHealthService(llm_client=client).execute(request_data)

        assert health.score == 72
        assert health.risk == "Medium-High"
        assert len(health.suggestions) == 3
        assert health.model == "gemini-2.5-pro"
        assert "Total assets: 1,000,000" in client.generate.await_args.args[0]

    async def test_service_propagates_llm_failure(
        self, request_data: PortfolioHealthRequest
    ) -> None:
        """When every model fails the error reaches the caller."""
        client = AsyncMock(spec=GeminiClient)
        client.generate.side_effect = ExternalAPIError("GeminiClient", "All Gemini models failed")

        with pytest.raises(ExternalAPIError):
            await PortfolioHealthService(llm_client=client).execute(request_data)
