from .session import (
    Session,
    SessionCreate,
    SessionUpdate,
    SessionListItem,
    SessionDetail,
    SessionResponse,
    SessionDetailResponse,
    SessionListResponse,
)
from .image import (
    Image,
    ImageCreate,
    ImageUpdate,
    ImageDetail,
    ImageResponse,
    ImageDetailResponse,
    ImageListResponse,
)
from .video import Video, VideoListResponse
from .media import (
    SpeechToTextRequest,
    TranslatePromptRequest,
    DescribeImageRequest,
    EditImageRequest,
    GenerateImageRequest,
    AnimateImageRequest,
    InpaintImageRequest,
)
from .film_project import (
    FilmProject,
    FilmProjectCreate,
    FilmProjectUpdate,
    FilmProjectResponse,
    FilmProjectListResponse,
    ProjectStats,
    ProjectStatsResponse,
)
from .character import (
    Character,
    CharacterCreate,
    CharacterUpdate,
    CharacterResponse,
    CharacterListResponse,
    CharacterEnhanceRequest,
    CharacterEnhanceResponse,
    CharacterBrief,
)
from .script import (
    Script,
    ScriptCreate,
    ScriptUpdate,
    ScriptGenerateRequest,
    ScriptResponse,
    ScriptListResponse,
)
from .shot import (
    Shot,
    ShotUpdate,
    ShotResponse,
    ShotListResponse,
    ShotPlanRequest,
    ShotBreakdownRequest,
    BreakdownShot,
    ShotBreakdownResponse,
    ShotImageRequest,
    ShotImageResponse,
    ShotAnimateResponse,
)

__all__ = [
    "Session",
    "SessionCreate",
    "SessionUpdate",
    "SessionListItem",
    "SessionDetail",
    "SessionResponse",
    "SessionDetailResponse",
    "SessionListResponse",
    "Image",
    "ImageCreate",
    "ImageUpdate",
    "ImageDetail",
    "ImageResponse",
    "ImageDetailResponse",
    "ImageListResponse",
    "Video",
    "VideoListResponse",
    "SpeechToTextRequest",
    "TranslatePromptRequest",
    "DescribeImageRequest",
    "EditImageRequest",
    "GenerateImageRequest",
    "AnimateImageRequest",
    "InpaintImageRequest",
    "FilmProject",
    "FilmProjectCreate",
    "FilmProjectUpdate",
    "FilmProjectResponse",
    "FilmProjectListResponse",
    "ProjectStats",
    "ProjectStatsResponse",
    "Character",
    "CharacterCreate",
    "CharacterUpdate",
    "CharacterResponse",
    "CharacterListResponse",
    "CharacterEnhanceRequest",
    "CharacterEnhanceResponse",
    "CharacterBrief",
    "Script",
    "ScriptCreate",
    "ScriptUpdate",
    "ScriptGenerateRequest",
    "ScriptResponse",
    "ScriptListResponse",
    "Shot",
    "ShotUpdate",
    "ShotResponse",
    "ShotListResponse",
    "ShotPlanRequest",
    "ShotBreakdownRequest",
    "BreakdownShot",
    "ShotBreakdownResponse",
    "ShotImageRequest",
    "ShotImageResponse",
    "ShotAnimateResponse",
]
