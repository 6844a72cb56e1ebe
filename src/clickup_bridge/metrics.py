"""
Métricas de diagnóstico do servidor: contadores por tool e latência.
"""

import statistics
from collections import defaultdict
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, List, Optional


class Metrics:
    """
    Métricas para diagnóstico e observabilidade.

    Inclui contadores de chamadas e erros por tool, total de chamadas à API
    e latência (p50, p95, p99).
    """

    def __init__(self, max_latency_samples: int = 1000):
        """
        Inicializa métricas.

        Args:
            max_latency_samples: Máximo de amostras de latência a manter (para memória)
        """
        self._max_samples = max_latency_samples
        self.reset()

    def reset(self) -> None:
        """Zera todos os contadores."""
        self.tool_calls: Dict[str, int] = defaultdict(int)
        self.tool_errors: Dict[str, int] = defaultdict(int)
        self.api_calls: int = 0
        self.api_errors: int = 0
        self._latencies: List[float] = []  # em milissegundos
        self._tool_latencies: Dict[str, List[float]] = defaultdict(list)

    def record_tool_call(self, tool_name: str) -> None:
        """Registra chamada de tool."""
        self.tool_calls[tool_name] += 1

    def record_tool_error(self, tool_name: str) -> None:
        """Registra erro em tool."""
        self.tool_errors[tool_name] += 1

    def record_api_call(self) -> None:
        """Registra chamada à API."""
        self.api_calls += 1

    def record_api_error(self) -> None:
        """Registra resposta de erro (status não-2xx ou falha de transporte)."""
        self.api_errors += 1

    def record_latency(self, latency_ms: float, tool_name: Optional[str] = None) -> None:
        """
        Registra latência de uma operação.

        Args:
            latency_ms: Latência em milissegundos
            tool_name: Nome da tool (opcional, para métricas por tool)
        """
        # Mantém apenas as últimas N amostras
        if len(self._latencies) >= self._max_samples:
            self._latencies.pop(0)
        self._latencies.append(latency_ms)

        if tool_name:
            tool_latencies = self._tool_latencies[tool_name]
            if len(tool_latencies) >= self._max_samples // 10:  # Menos amostras por tool
                tool_latencies.pop(0)
            tool_latencies.append(latency_ms)

    @contextmanager
    def measure_latency(self, tool_name: Optional[str] = None):
        """
        Context manager para medir latência automaticamente.

        Usage:
            with metrics.measure_latency("getSpaces"):
                envelope = await registry.invoke(...)
        """
        start = perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (perf_counter() - start) * 1000
            self.record_latency(elapsed_ms, tool_name)

    def _calculate_percentiles(self, data: List[float]) -> Dict[str, float]:
        """Calcula percentis de latência."""
        if not data:
            return {"p50": 0, "p95": 0, "p99": 0, "avg": 0, "min": 0, "max": 0, "samples": 0}

        sorted_data = sorted(data)
        n = len(sorted_data)

        return {
            "p50": sorted_data[int(n * 0.50)],
            "p95": sorted_data[int(n * 0.95)] if n > 1 else sorted_data[-1],
            "p99": sorted_data[int(n * 0.99)] if n > 1 else sorted_data[-1],
            "avg": statistics.mean(sorted_data),
            "min": sorted_data[0],
            "max": sorted_data[-1],
            "samples": n
        }

    def get_summary(self) -> Dict[str, Any]:
        """Retorna resumo completo das métricas."""
        summary = {
            "tool_calls": dict(self.tool_calls),
            "tool_errors": dict(self.tool_errors),
            "api_calls": self.api_calls,
            "api_errors": self.api_errors,
            "latency_ms": self._calculate_percentiles(self._latencies)
        }

        # Latência por tool (top 5 mais chamadas)
        if self._tool_latencies:
            top_tools = sorted(
                self.tool_calls.items(),
                key=lambda x: x[1],
                reverse=True
            )[:5]
            summary["latency_by_tool"] = {
                tool: self._calculate_percentiles(self._tool_latencies.get(tool, []))
                for tool, _ in top_tools
                if tool in self._tool_latencies
            }

        return summary


# Instância global de métricas
metrics = Metrics()
