# drinkshop/services/table_client.py
import json
from typing import Any, Dict, List

import requests

from drinkshop.utils.retry import http_retry, write_retry
from drinkshop.utils.settings import TABLE_API_URL, TABLE_API_TOKEN
from drinkshop.utils.logging import get_logger

logger = get_logger(__name__)


def clean_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Usuwa pola None i puste stringi - hosted tabela odrzuca je przy walidacji."""
    return {k: v for k, v in data.items() if v is not None and v != ""}


def link_row_filter(field: str, value: Any) -> str:
    return json.dumps({
        "filter_type": "AND",
        "filters": [{"type": "link_row_has", "field": field, "value": str(value)}],
    })


class TableClient:
    """
    Klient REST dla hostowanych tabel (Baserow).
    Wiersze adresowane przez table_id / row_id, nazwy pol zamiast field_XXX.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: int = 5,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or TABLE_API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Token {token if token is not None else TABLE_API_TOKEN}",
            "Content-Type": "application/json",
        })

    def _url(self, table_id: int, row_id: int | None = None) -> str:
        if row_id is None:
            return f"{self.base_url}/{table_id}/"
        return f"{self.base_url}/{table_id}/{row_id}/"

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        params = {"user_field_names": "true", **kwargs.pop("params", {})}
        logger.info(f"TableClient {method} {url}")

        resp = self.session.request(method, url, params=params, timeout=self.timeout, **kwargs)
        resp.raise_for_status()
        if resp.status_code == 204 or not resp.content:
            return {}
        return resp.json()

    @http_retry()
    def get_row(self, table_id: int, row_id: int) -> Dict[str, Any]:
        return self._request("GET", self._url(table_id, row_id))

    @http_retry()
    def _get_page(self, table_id: int, params: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("GET", self._url(table_id), params=params)

    def list_rows(
        self,
        table_id: int,
        filters: str | None = None,
        size: int = 200,
    ) -> List[Dict[str, Any]]:
        """Wszystkie wiersze tabeli - kolejne strony dopoki API zwraca link "next"."""
        params: Dict[str, Any] = {"size": size, "page": 1}
        if filters:
            params["filters"] = filters

        rows: List[Dict[str, Any]] = []
        while True:
            data = self._get_page(table_id, dict(params))
            rows.extend(data.get("results", []))
            if not data.get("next"):
                return rows
            params["page"] += 1

    @write_retry()
    def create_row(self, table_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", self._url(table_id), json=clean_payload(data))

    @write_retry()
    def update_row(self, table_id: int, row_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = clean_payload(data)
        if not payload:
            raise ValueError("Brak danych do aktualizacji")
        return self._request("PATCH", self._url(table_id, row_id), json=payload)
