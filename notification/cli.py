#!/usr/bin/env python3
"""
Operator CLI for the notification fan-out engine.

Runs a single broadcast outside the web app, e.g. to re-announce an event
after a gateway outage.

Usage:
    python -m notification.cli new-event --title "Adoption Day" --event-id 42 --creator maria
    python -m notification.cli global-chat --sender-id u1 --sender-name admin --role 1 --message "Hi"
    python -m notification.cli notify-user --user-id u7 --title "Adoption approved" --message "..." --route /adoption/9
    python -m notification.cli new-post --title "Vaccination drive" --post-id 3 --category health_alerts --dry-run
"""

import sys
import argparse
import logging
from typing import List, Optional

from core.config_loader import load_config
from notification.exceptions import NotificationError
from notification.models import (
    TriggerContext,
    NewEvent,
    NewPost,
    GlobalChatMessage,
    ForumAdminBroadcast,
    ForumMessage,
    DirectNotice,
    FanoutResult,
)
from notification.service import NotificationService, run_broadcast

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='PawsConnect notification broadcast')
    parser.add_argument('--config', default='config.yaml')
    parser.add_argument('--dry-run', action='store_true', help='Log push payloads instead of sending')
    parser.add_argument('--batch-size', type=int, default=None)
    parser.add_argument('--verbose', action='store_true')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('new-event')
    p.add_argument('--title', required=True)
    p.add_argument('--event-id', required=True)
    p.add_argument('--creator')

    p = sub.add_parser('admin-broadcast')
    p.add_argument('--forum-id', type=int, required=True)
    p.add_argument('--admin-name')
    p.add_argument('--sender-id', required=True)
    p.add_argument('--message', required=True)
    p.add_argument('--image-url')

    p = sub.add_parser('global-chat')
    p.add_argument('--sender-id', required=True)
    p.add_argument('--sender-name')
    p.add_argument('--role', type=int)
    p.add_argument('--message', required=True)
    p.add_argument('--image-url')

    p = sub.add_parser('new-post')
    p.add_argument('--title', required=True)
    p.add_argument('--post-id', required=True)
    p.add_argument('--category', required=True)

    p = sub.add_parser('forum-message')
    p.add_argument('--forum-id', type=int, required=True)
    p.add_argument('--sender-id', required=True)
    p.add_argument('--sender-name')
    p.add_argument('--message', required=True)
    p.add_argument('--image-url')

    p = sub.add_parser('notify-user')
    p.add_argument('--user-id', required=True)
    p.add_argument('--title', required=True)
    p.add_argument('--message', required=True)
    p.add_argument('--route', required=True)

    return parser


def context_from_args(args: argparse.Namespace) -> TriggerContext:
    if args.command == 'new-event':
        return NewEvent(event_id=args.event_id, title=args.title, creator_name=args.creator)
    if args.command == 'admin-broadcast':
        return ForumAdminBroadcast(
            forum_id=args.forum_id,
            admin_name=args.admin_name,
            message=args.message,
            sender_id=args.sender_id,
            image_url=args.image_url,
        )
    if args.command == 'global-chat':
        return GlobalChatMessage(
            sender_name=args.sender_name,
            message=args.message,
            sender_id=args.sender_id,
            sender_role=args.role,
            image_url=args.image_url,
        )
    if args.command == 'new-post':
        return NewPost(post_id=args.post_id, title=args.title, category=args.category)
    if args.command == 'forum-message':
        return ForumMessage(
            forum_id=args.forum_id,
            sender_name=args.sender_name,
            message=args.message,
            sender_id=args.sender_id,
            image_url=args.image_url,
        )
    if args.command == 'notify-user':
        return DirectNotice(user_id=args.user_id, title=args.title, message=args.message, route=args.route)
    raise ValueError(f"Unknown command: {args.command}")


def format_result(result: FanoutResult) -> str:
    summary = result.summary
    return (
        f"{result.kind}: {summary.recipients} recipients in {summary.batches} batch(es) | "
        f"push {summary.push.succeeded} ok / {summary.push.failed} failed | "
        f"in-app {summary.in_app.succeeded} ok / {summary.in_app.failed} failed"
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.batch_size is not None and args.batch_size < 1:
        parser.error("--batch-size must be at least 1")

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args.config)
        if args.dry_run:
            config.notifications.push.dry_run = True
        if args.batch_size is not None:
            config.notifications.fanout.batch_size = args.batch_size

        service = NotificationService.from_config(config)
        result = run_broadcast(service, context_from_args(args))
    except NotificationError as e:
        logger.error(f"Broadcast failed: {e}")
        return 1

    print(format_result(result))
    return 0


if __name__ == '__main__':
    sys.exit(main())
