"""Retrieval-augmented answer generation on top of the search engine."""

import re

from simsearch.llm.client import TextCompletionClient
from simsearch.llm.prompts import RAGPromptTemplate
from simsearch.logging_config import get_logger
from simsearch.rag.models import (
    AdvancedRAGQuery,
    AdvancedRAGResponse,
    RAGComparison,
    RAGQuery,
    RAGResponse,
    RetrievalStats,
)
from simsearch.retrieval.coordinator import RetrievalCoordinator
from simsearch.retrieval.models import SearchOptions
from simsearch.similarity.models import SearchResult

logger = get_logger(__name__)

CITATION_PATTERN = re.compile(r"\[Source:\s*([^\]]+)\]")
NUMBERED_LINE = re.compile(r"^\d+\.")

MAX_EXPANSIONS = 3

# Room left for the ellipsis when the last document is cut short.
TRUNCATION_MARGIN = 100


def document_title(result: SearchResult) -> str:
    """Title of a result, falling back to its id."""
    title = result.metadata.get("title")
    return title if isinstance(title, str) and title else result.id


def prepare_context(results: list[SearchResult], max_length: int) -> str:
    """Join retrieved documents into a context block within a character budget.

    Documents are added whole while they fit. The first one that does not
    fit is cut short, if enough room remains, and nothing follows it.
    """
    parts: list[str] = []
    current_length = 0

    for result in results:
        title = document_title(result)
        content = str(result.metadata.get("content", ""))
        block = f"DOCUMENT: {title}\n{content}\n\n"

        if current_length + len(block) > max_length:
            remaining = max_length - current_length - TRUNCATION_MARGIN
            if remaining > 0:
                parts.append(f"DOCUMENT: {title}\n{content[:remaining]}...\n\n")
            break

        parts.append(block)
        current_length += len(block)

    return "".join(parts).strip()


def extract_citations(answer: str, results: list[SearchResult]) -> list[str]:
    """Titles cited as [Source: ...] or mentioned by name, without repeats."""
    citations = [match.strip() for match in CITATION_PATTERN.findall(answer)]

    lowered = answer.lower()
    for result in results:
        title = document_title(result)
        if title.lower() in lowered and title not in citations:
            citations.append(title)

    return list(dict.fromkeys(citations))


class RAGPipeline:
    """Retrieve documents, assemble context, ask the completion service."""

    NO_RESULTS_ANSWER = "I could not find relevant information to answer your question."

    def __init__(
        self,
        coordinator: RetrievalCoordinator,
        completion_client: TextCompletionClient,
        prompt_template: RAGPromptTemplate | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            coordinator: Search entry point.
            completion_client: Text completion collaborator.
            prompt_template: Prompt template for answers.
        """
        self._coordinator = coordinator
        self._completion_client = completion_client
        self._prompt_template = prompt_template or RAGPromptTemplate()

    async def answer(self, request: RAGQuery) -> RAGResponse:
        """Answer a question from retrieved documents.

        Raises:
            SimSearchError: Retrieval or completion failures propagate.
        """
        logger.info(
            "Processing RAG query",
            extra={"question_length": len(request.question), "mode": request.search.mode.value},
        )

        result_set = await self._coordinator.search(request.question, request.search)
        results = result_set.results

        if not results:
            return RAGResponse(
                query=request.question,
                answer=self.NO_RESULTS_ANSWER,
                stats=RetrievalStats(
                    documents_retrieved=0,
                    average_similarity=0.0,
                    context_length=0,
                ),
            )

        context = prepare_context(results, request.max_context_length)
        system_prompt, user_prompt = self._prompt_template.build_prompt(
            question=request.question,
            context=context,
        )
        answer = await self._completion_client.complete(user_prompt, system_prompt=system_prompt)

        citations = extract_citations(answer, results) if request.include_citations else []
        stats = RetrievalStats(
            documents_retrieved=result_set.stats.retrieved,
            average_similarity=round(result_set.stats.average_score, 2),
            context_length=len(context),
        )

        logger.info(
            "RAG query completed",
            extra={"documents": stats.documents_retrieved, "citations": len(citations)},
        )

        return RAGResponse(
            query=request.question,
            answer=answer,
            documents=results,
            citations=citations,
            stats=stats,
        )

    async def expand_query(self, question: str) -> list[str]:
        """Ask the completion service for up to three related queries.

        Blank and numbered lines are dropped.

        Raises:
            CompletionError: If generation fails.
        """
        text = await self._completion_client.complete(
            self._prompt_template.build_expansion_prompt(question)
        )
        queries = [
            line.strip()
            for line in text.splitlines()
            if line.strip() and not NUMBERED_LINE.match(line.strip())
        ]
        return queries[:MAX_EXPANSIONS]

    async def answer_advanced(self, request: AdvancedRAGQuery) -> AdvancedRAGResponse:
        """Answer with query expansion and optional per-query steps.

        The final question is the asked one followed by the first two
        related queries.
        """
        expanded = await self.expand_query(request.question) if request.expand_query else []

        steps: list[RAGResponse] = []
        if request.multi_step:
            step_search = request.search.model_copy(update={"top_k": request.step_top_k})
            for query in expanded or [request.question]:
                steps.append(await self.answer(self._follow_up(request, query, step_search)))

        final_question = request.question
        if expanded:
            final_question = f"{request.question} (Also consider: {', '.join(expanded[:2])})"
        final = await self.answer(self._follow_up(request, final_question, request.search))

        logger.info(
            "Advanced RAG query completed",
            extra={"expansions": len(expanded), "steps": len(steps)},
        )
        return AdvancedRAGResponse(
            query=request.question,
            expanded_queries=expanded,
            steps=steps,
            final=final,
        )

    async def compare_with_direct(self, request: RAGQuery) -> RAGComparison:
        """Answer once from retrieved documents and once without any."""
        rag = await self.answer(request)

        system_prompt, user_prompt = self._prompt_template.build_direct_prompt(request.question)
        direct = await self._completion_client.complete(user_prompt, system_prompt=system_prompt)

        return RAGComparison(
            query=request.question,
            rag=rag,
            direct_answer=direct,
            documents_used=len(rag.documents),
            citations_count=len(rag.citations),
        )

    @staticmethod
    def _follow_up(request: RAGQuery, question: str, search: SearchOptions) -> RAGQuery:
        return RAGQuery(
            question=question,
            search=search,
            max_context_length=request.max_context_length,
            include_citations=request.include_citations,
        )
