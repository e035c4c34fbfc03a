from dataclasses import dataclass
from typing import Dict, List
from bindings_release.core.workflow import RELEASE_STAGES, Stage, StageName
from bindings_release.agents.base import BaseAgent, ReleaseContext
from bindings_release.agents.impl_clone import CloneSourceAgent, CloneTargetAgent
from bindings_release.agents.impl_build import BuilderAgent
from bindings_release.agents.impl_stage import StageArtifactAgent
from bindings_release.agents.impl_verify import TestGateAgent, library_suite, integration_suite
from bindings_release.agents.impl_publish import PublishAgent

@dataclass
class AgentRegistry:
    mapping: Dict[StageName, BaseAgent]

    def get(self, stage: StageName) -> BaseAgent:
        return self.mapping[stage]

    def stages(self, ctx: ReleaseContext, order: List[StageName] = RELEASE_STAGES) -> List[Stage]:
        """Bind each agent to ``ctx``; every stage depends on the one before it."""
        stages = []
        previous = None
        for name in order:
            agent = self.get(name)
            stages.append(Stage(
                name=name.value,
                action=lambda agent=agent: agent.run(ctx).artifacts_index,
                depends_on=previous,
            ))
            previous = name.value
        return stages

    @staticmethod
    def default() -> "AgentRegistry":
        return AgentRegistry(mapping={
            StageName.CHECKOUT_SOURCE: CloneSourceAgent(),
            StageName.BUILD: BuilderAgent(),
            StageName.CLONE_TARGET: CloneTargetAgent(),
            StageName.STAGE_ARTIFACT: StageArtifactAgent(),
            StageName.TEST_LIBRARY: TestGateAgent(StageName.TEST_LIBRARY, library_suite),
            StageName.TEST_INTEGRATION: TestGateAgent(StageName.TEST_INTEGRATION, integration_suite),
            StageName.PUBLISH: PublishAgent(),
        })
