# yapf: disable
import logging
from typing import List, Tuple, Union

from quickpose.utils.log_utils import get_logger
from .metrics.base_metric import BaseMetric
from .metrics.builder import build_metric

# yapf: enable


class MetricManager:
    """MetricManager evaluates several metrics in one call.

    Metrics run in ascending RANK order, and every metric receives the
    results of the metrics before it as keyword arguments, e.g. PCPMetric
    reads match_matrix_gt2pred from PredictionMatcher.
    """

    def __init__(
        self,
        metric_list: List[Union[dict, BaseMetric]],
        pick_dict: Union[dict, None] = None,
        logger: Union[None, str, logging.Logger] = None,
    ) -> None:
        """Construction of MetricManager.

        Args:
            metric_list (List[Union[dict, BaseMetric]]):
                A list of metric instances or configs.
            pick_dict (Union[dict, None], optional):
                Metric name -> 'all', a key or a list of keys to report.
                Defaults to None, pick all.
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. If None, root logger will be selected.
                Defaults to None.
        """
        self.logger = get_logger(logger)
        metrics = []
        for metric in metric_list:
            if isinstance(metric, dict):
                metric['logger'] = self.logger
                metric = build_metric(metric)
            metrics.append(metric)
        self.metric_list = sorted(
            metrics, key=lambda metric: metric.__class__.RANK)
        self.set_pick_dict(pick_dict)

    def set_pick_dict(self, raw_pick_dict: Union[dict, None]) -> None:
        if raw_pick_dict is None:
            self.pick_dict = {
                metric.name: 'all'
                for metric in self.metric_list
            }
            return
        pick_dict = dict()
        for name, value in raw_pick_dict.items():
            if value != 'all' and not isinstance(value, list):
                value = [value]
            pick_dict[name] = value
        self.pick_dict = pick_dict

    def __call__(self, *args, **kwargs) -> Tuple[dict, dict]:
        """Calculate metrics one by one.

        Returns:
            Tuple[dict, dict]:
                Picked results per metric name, and every value
                returned by any metric.
        """
        accumulate_kwargs = dict(kwargs)
        manager_ret_dict = dict()
        for metric in self.metric_list:
            metric_ret_dict = metric(*args, **accumulate_kwargs)
            accumulate_kwargs.update(metric_ret_dict)
            selections = self.pick_dict.get(metric.name, None)
            if selections is None:
                continue
            if selections == 'all':
                manager_ret_dict[metric.name] = metric_ret_dict
            else:
                manager_ret_dict[metric.name] = {
                    key: metric_ret_dict[key]
                    for key in selections
                }
        return manager_ret_dict, accumulate_kwargs
