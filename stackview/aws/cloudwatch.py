"""CloudWatch proxy: metric alarms and metrics."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from stackview.base.exceptions import InvalidRequestError, ResourceNotFoundError
from stackview.base.reshape import pairs_to_tags
from stackview.base.service import ProxyService
from stackview.base.validation import (
    as_datetime,
    as_int,
    compact,
    is_missing,
    parse_json,
    require,
)

ALARM_ACTIONS = ("setState", "enableActions", "disableActions")


def _dimensions_in(dimensions: list[dict[str, Any]] | None) -> list[dict[str, Any]] | None:
    if not dimensions:
        return None
    return [{"Name": d.get("name"), "Value": d.get("value")} for d in dimensions]


def _dimensions_out(dimensions: list[dict[str, Any]] | None) -> list[dict[str, str]]:
    return [
        {"name": d.get("Name") or "", "value": d.get("Value") or ""}
        for d in dimensions or []
    ]


def _metric_datum(datum: dict[str, Any]) -> dict[str, Any]:
    stats = datum.get("statisticValues")
    return compact(
        MetricName=datum.get("metricName"),
        Value=datum.get("value"),
        Unit=datum.get("unit"),
        Timestamp=as_datetime(datum.get("timestamp")),
        Dimensions=_dimensions_in(datum.get("dimensions")),
        StatisticValues=compact(
            SampleCount=stats.get("sampleCount"),
            Sum=stats.get("sum"),
            Minimum=stats.get("minimum"),
            Maximum=stats.get("maximum"),
        ) if stats else None,
        StorageResolution=datum.get("storageResolution"),
    )


def _metric_data_query(query: dict[str, Any]) -> dict[str, Any]:
    stat = query.get("metricStat")
    metric_stat = None
    if stat:
        metric = stat.get("metric") or {}
        metric_stat = compact(
            Metric=compact(
                Namespace=metric.get("namespace"),
                MetricName=metric.get("metricName"),
                Dimensions=_dimensions_in(metric.get("dimensions")),
            ),
            Period=stat.get("period"),
            Stat=stat.get("stat"),
            Unit=stat.get("unit"),
        )
    return compact(
        Id=query.get("id"),
        MetricStat=metric_stat,
        Expression=query.get("expression"),
        Label=query.get("label"),
        ReturnData=query.get("returnData") is not False,
        Period=query.get("period"),
    )


class CloudWatchService(ProxyService):
    """Alarms, alarm history and metric reads/writes."""

    service_id = "cloudwatch"
    client_attr = "cloudwatch"
    _ERROR_MAP = {"ResourceNotFound": ResourceNotFoundError}

    # --- Alarms ---

    def list_alarms(
        self,
        alarm_names: list[str] | None = None,
        alarm_name_prefix: str | None = None,
        state_value: str | None = None,
        action_prefix: str | None = None,
        max_records: Any = None,
        next_token: str | None = None,
    ) -> dict[str, Any]:
        resp = self._call(
            "describe_alarms",
            **compact(
                AlarmNames=alarm_names or None,
                AlarmNamePrefix=alarm_name_prefix or None,
                StateValue=state_value or None,
                ActionPrefix=action_prefix or None,
                MaxRecords=as_int(max_records, 100),
                NextToken=next_token or None,
            ),
        )
        return {
            "metricAlarms": resp.get("MetricAlarms") or [],
            "compositeAlarms": resp.get("CompositeAlarms") or [],
            "nextToken": resp.get("NextToken"),
        }

    def put_alarm(self, body: dict[str, Any]) -> dict[str, Any]:
        """Create or update a metric alarm from a camelCase request body.

        An alarm with a non-empty ``metrics`` list is a metric-math alarm and
        only needs evaluation periods, threshold and comparison operator; a
        plain metric alarm additionally needs the metric identity, a
        statistic and a period.
        """
        alarm_name = body.get("alarmName")
        require("Alarm name is required", alarm_name)
        metrics = body.get("metrics")
        common = (
            body.get("evaluationPeriods"),
            body.get("threshold"),
            body.get("comparisonOperator"),
        )
        if metrics:
            if any(is_missing(v) for v in common):
                raise InvalidRequestError(
                    "Evaluation periods, threshold, and comparison operator are required"
                    " for composite alarms"
                )
        else:
            missing_stat = is_missing(body.get("statistic")) and is_missing(
                body.get("extendedStatistic")
            )
            if missing_stat or any(
                is_missing(v)
                for v in (body.get("metricName"), body.get("namespace"), body.get("period"), *common)
            ):
                raise InvalidRequestError("Missing required parameters for metric alarm")

        tags = body.get("tags")
        params = compact(
            AlarmName=alarm_name,
            AlarmDescription=body.get("alarmDescription"),
            ActionsEnabled=body.get("actionsEnabled") is not False,
            OKActions=body.get("okActions"),
            AlarmActions=body.get("alarmActions"),
            InsufficientDataActions=body.get("insufficientDataActions"),
            MetricName=body.get("metricName"),
            Namespace=body.get("namespace"),
            Statistic=body.get("statistic"),
            ExtendedStatistic=body.get("extendedStatistic"),
            Dimensions=_dimensions_in(body.get("dimensions")),
            Period=body.get("period"),
            Unit=body.get("unit"),
            EvaluationPeriods=body.get("evaluationPeriods"),
            DatapointsToAlarm=body.get("datapointsToAlarm"),
            Threshold=body.get("threshold"),
            ComparisonOperator=body.get("comparisonOperator"),
            TreatMissingData=body.get("treatMissingData"),
            EvaluateLowSampleCountPercentile=body.get("evaluateLowSampleCountPercentile"),
            Metrics=metrics or None,
            Tags=pairs_to_tags(tags) if tags else None,
            ThresholdMetricId=body.get("thresholdMetricId"),
        )
        self._call("put_metric_alarm", **params)
        return {"message": "Alarm created/updated successfully", "alarmName": alarm_name}

    def get_alarm(self, alarm_name: str) -> dict[str, Any]:
        resp = self._call("describe_alarms", not_found=True, AlarmNames=[alarm_name], MaxRecords=1)
        alarms = (resp.get("MetricAlarms") or []) + (resp.get("CompositeAlarms") or [])
        if not alarms:
            raise ResourceNotFoundError("Alarm not found")
        return alarms[0]

    def update_alarm(
        self,
        alarm_name: str,
        action: str | None,
        state_value: str | None = None,
        state_reason: str | None = None,
        state_reason_data: str | None = None,
    ) -> dict[str, Any]:
        """Change alarm state or toggle its actions."""
        if action not in ALARM_ACTIONS:
            raise InvalidRequestError("Invalid action")
        if action == "setState":
            require("State value and reason are required", state_value, state_reason)
            self._call(
                "set_alarm_state",
                **compact(
                    AlarmName=alarm_name,
                    StateValue=state_value,
                    StateReason=state_reason,
                    StateReasonData=state_reason_data,
                ),
            )
        elif action == "enableActions":
            self._call("enable_alarm_actions", AlarmNames=[alarm_name])
        else:
            self._call("disable_alarm_actions", AlarmNames=[alarm_name])
        return {"message": f"Alarm {action} completed successfully", "alarmName": alarm_name}

    def delete_alarm(self, alarm_name: str) -> dict[str, Any]:
        self._call("delete_alarms", AlarmNames=[alarm_name])
        return {"message": "Alarm deleted successfully", "alarmName": alarm_name}

    def alarm_history(
        self,
        alarm_name: str,
        history_item_type: str | None = None,
        start_date: Any = None,
        end_date: Any = None,
        max_records: Any = None,
        next_token: str | None = None,
        scan_by: str | None = None,
    ) -> dict[str, Any]:
        resp = self._call(
            "describe_alarm_history",
            **compact(
                AlarmName=alarm_name,
                HistoryItemType=history_item_type or None,
                StartDate=as_datetime(start_date),
                EndDate=as_datetime(end_date),
                MaxRecords=as_int(max_records, 100),
                NextToken=next_token or None,
                ScanBy=scan_by or None,
            ),
        )
        return {
            "alarmHistoryItems": resp.get("AlarmHistoryItems") or [],
            "nextToken": resp.get("NextToken"),
        }

    # --- Metrics ---

    def list_metrics(
        self,
        namespace: str | None = None,
        metric_name: str | None = None,
        dimensions: str | None = None,
        next_token: str | None = None,
        recently_active: bool = False,
    ) -> dict[str, Any]:
        params = compact(
            Namespace=namespace or None,
            MetricName=metric_name or None,
            NextToken=next_token or None,
            RecentlyActive="PT3H" if recently_active else None,
        )
        if dimensions:
            params["Dimensions"] = parse_json(dimensions, "Invalid JSON in dimensions")
        resp = self._call("list_metrics", **params)
        metrics = [
            {
                "namespace": m.get("Namespace"),
                "metricName": m.get("MetricName"),
                "dimensions": _dimensions_out(m.get("Dimensions")),
            }
            for m in resp.get("Metrics") or []
        ]
        return {"metrics": metrics, "nextToken": resp.get("NextToken")}

    def put_metric_data(self, namespace: str | None, metric_data: Any) -> dict[str, Any]:
        if is_missing(namespace) or not isinstance(metric_data, list) or not metric_data:
            raise InvalidRequestError("Namespace and metricData array are required")
        data = []
        for datum in metric_data:
            entry = _metric_datum(datum)
            entry.setdefault("Timestamp", datetime.now(timezone.utc))
            data.append(entry)
        self._call("put_metric_data", Namespace=namespace, MetricData=data)
        return {
            "message": "Metric data published successfully",
            "namespace": namespace,
            "count": len(metric_data),
        }

    def get_metric_statistics(
        self,
        namespace: str | None,
        metric_name: str | None,
        start_time: Any,
        end_time: Any,
        period: Any,
        statistics: list[str] | None,
        unit: str | None = None,
        dimensions: str | None = None,
    ) -> dict[str, Any]:
        require(
            "Missing required parameters",
            namespace,
            metric_name,
            start_time,
            end_time,
            period,
            statistics,
        )
        params = compact(
            Namespace=namespace,
            MetricName=metric_name,
            StartTime=as_datetime(start_time),
            EndTime=as_datetime(end_time),
            Period=as_int(period),
            Statistics=statistics,
            Unit=unit or None,
        )
        if dimensions:
            params["Dimensions"] = parse_json(dimensions, "Invalid JSON in dimensions")
        resp = self._call("get_metric_statistics", **params)
        return {"label": resp.get("Label"), "datapoints": resp.get("Datapoints") or []}

    def get_metric_data(
        self,
        metric_data_queries: Any,
        start_time: Any,
        end_time: Any,
        next_token: str | None = None,
        scan_by: str | None = None,
        max_datapoints: int | None = None,
    ) -> dict[str, Any]:
        if (
            not isinstance(metric_data_queries, list)
            or not metric_data_queries
            or is_missing(start_time)
            or is_missing(end_time)
        ):
            raise InvalidRequestError("metricDataQueries, startTime, and endTime are required")
        resp = self._call(
            "get_metric_data",
            **compact(
                MetricDataQueries=[_metric_data_query(q) for q in metric_data_queries],
                StartTime=as_datetime(start_time),
                EndTime=as_datetime(end_time),
                NextToken=next_token or None,
                ScanBy=scan_by or None,
                MaxDatapoints=max_datapoints,
            ),
        )
        return {
            "metricDataResults": resp.get("MetricDataResults") or [],
            "nextToken": resp.get("NextToken"),
            "messages": resp.get("Messages"),
        }
