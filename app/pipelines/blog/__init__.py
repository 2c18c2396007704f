"""Blog content pipeline package.

Modules are organised by the order in which a request flows through them:

1. `intake` – mint the request id and enqueue enhancement.
2. `enhancement` – turn the brief into an SEO-enriched content brief.
3. `generation` – generate the Markdown article and persist it (`parser`).
4. `synthesis` – narrate the stored article with retries (`retry`).
5. `retrieval` – merge article and audio for polling clients.

`orchestrator.ContentPipeline` connects stages 2-4 through the stage queue;
`flow` documents the sequence.
"""

from .enhancement import EnhancementOutcome, enhance_prompt
from .flow import (
    ENHANCE_TOPIC,
    GENERATE_TOPIC,
    SPEECH_TOPIC,
    BlogContentPipeline,
    PipelineStage,
)
from .generation import ContentGenerationError, build_article, generate_article
from .intake import accept_request
from .orchestrator import ContentPipeline
from .parser import ParsedArticle, parse_article
from .retrieval import AudioUnavailableError, WavAudio, build_wav_file, get_audio, get_content
from .retry import RetryExhaustedError, RetryPolicy
from .synthesis import PipelineStateError, article_to_speech_text, synthesize_article_audio
from .types import (
    ArticleMetadata,
    ArticleSection,
    AudioArtifact,
    AudioFailure,
    BlogArticle,
    BlogRecord,
)

__all__ = [
    "ArticleMetadata",
    "ArticleSection",
    "AudioArtifact",
    "AudioFailure",
    "AudioUnavailableError",
    "BlogArticle",
    "BlogContentPipeline",
    "BlogRecord",
    "ContentGenerationError",
    "ContentPipeline",
    "ENHANCE_TOPIC",
    "EnhancementOutcome",
    "GENERATE_TOPIC",
    "ParsedArticle",
    "PipelineStage",
    "PipelineStateError",
    "RetryExhaustedError",
    "RetryPolicy",
    "SPEECH_TOPIC",
    "WavAudio",
    "accept_request",
    "article_to_speech_text",
    "build_article",
    "build_wav_file",
    "enhance_prompt",
    "generate_article",
    "get_audio",
    "get_content",
    "parse_article",
    "synthesize_article_audio",
]
