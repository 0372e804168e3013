# Search module
from .engine import VideoSearchEngine
from .models import SearchResult, BatchSearchReport
from .sources import CandidateSource, InMemorySource, JsonFileSource
