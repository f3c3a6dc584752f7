"""Native-calendar side channel."""

from feedcal.push.descriptor import PushAction, PushRequest, build_push_request
from feedcal.push.dispatcher import LocalPushDispatcher

__all__ = ["LocalPushDispatcher", "PushAction", "PushRequest", "build_push_request"]
