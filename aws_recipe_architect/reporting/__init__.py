from .format import render_report
from .payload import build_checkout_payload, estimate_to_dict, plan_to_dict

__all__ = ["build_checkout_payload", "estimate_to_dict", "plan_to_dict", "render_report"]
