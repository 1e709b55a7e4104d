# ============================================================================
# FILE: vidtube/services/container.py
# ============================================================================
from dataclasses import dataclass
from vidtube.config import Settings
from vidtube.core.asset_store import AssetStore
from vidtube.core.cache import RedisCache
from vidtube.core.security import TokenService
from vidtube.services.comment_service import CommentService
from vidtube.services.dashboard_service import DashboardService
from vidtube.services.like_service import LikeService
from vidtube.services.playlist_service import PlaylistService
from vidtube.services.session_service import SessionService
from vidtube.services.subscription_service import SubscriptionService
from vidtube.services.toggle_service import ToggleService
from vidtube.services.tweet_service import TweetService
from vidtube.services.user_service import UserService
from vidtube.services.video_service import VideoService

@dataclass
class ServiceContainer:
    """Every service the API uses, wired once per application"""
    tokens: TokenService
    sessions: SessionService
    users: UserService
    toggles: ToggleService
    likes: LikeService
    subscriptions: SubscriptionService
    comments: CommentService
    tweets: TweetService
    playlists: PlaylistService
    videos: VideoService
    dashboard: DashboardService

def build_services(settings: Settings, asset_store: AssetStore, cache: RedisCache) -> ServiceContainer:
    tokens = TokenService(settings)
    toggles = ToggleService()
    return ServiceContainer(
        tokens=tokens,
        sessions=SessionService(tokens),
        users=UserService(asset_store, cache),
        toggles=toggles,
        likes=LikeService(toggles, cache),
        subscriptions=SubscriptionService(toggles, cache),
        comments=CommentService(),
        tweets=TweetService(),
        playlists=PlaylistService(),
        videos=VideoService(asset_store, cache),
        dashboard=DashboardService(cache),
    )
