"""
Onboarding question bank.

Twelve questions, four options each. Every option contributes a partial
delta to the trait dimensions it reflects. The bank is read-only,
process-wide data; a different bank can be supplied from YAML through
the questionnaire.question_bank config entry.
"""

from typing import Tuple

from .schema import Question, QuestionOption


def _q(qid: int, prompt: str, *options: Tuple[str, dict]) -> Question:
    return Question(
        id=qid,
        question=prompt,
        options=tuple(QuestionOption(text=text, traits=traits) for text, traits in options)
    )


MINDSET_QUESTIONS: Tuple[Question, ...] = (
    _q(1, "When faced with a complex problem, what's your first instinct?",
       ("Break it down into smaller, logical steps", {"analytical": 20, "logical": 15}),
       ("Brainstorm creative solutions", {"creative": 20, "risk_taking": 10}),
       ("Consider how it affects the people involved", {"emotional": 20, "collaborative": 10}),
       ("Look for patterns and data to analyze", {"analytical": 15, "logical": 20})),
    _q(2, "In a team project, which role do you naturally take?",
       ("The one who organizes and plans everything", {"logical": 15, "analytical": 15}),
       ("The creative one who comes up with new ideas", {"creative": 20, "risk_taking": 10}),
       ("The mediator who ensures everyone works together", {"collaborative": 20, "emotional": 15}),
       ("The leader who makes final decisions", {"risk_taking": 15, "logical": 10})),
    _q(3, "How do you prefer to make important decisions?",
       ("Analyze all available data thoroughly", {"analytical": 20, "logical": 15}),
       ("Trust my gut feeling", {"emotional": 20, "risk_taking": 10}),
       ("Consult with others and gather opinions", {"collaborative": 20, "emotional": 10}),
       ("Weigh pros and cons systematically", {"logical": 20, "analytical": 10})),
    _q(4, "When learning something new, you prefer:",
       ("Reading documentation and structured tutorials", {"logical": 15, "analytical": 15}),
       ("Experimenting and figuring it out yourself", {"creative": 15, "risk_taking": 15}),
       ("Learning with a group or mentor", {"collaborative": 20, "emotional": 10}),
       ("Watching videos and visual demonstrations", {"creative": 15, "emotional": 10})),
    _q(5, "How do you handle unexpected changes to your plans?",
       ("Adapt quickly and see it as an opportunity", {"risk_taking": 20, "creative": 10}),
       ("Analyze the impact before deciding next steps", {"analytical": 20, "logical": 10}),
       ("Discuss with others to find the best approach", {"collaborative": 20, "emotional": 10}),
       ("Feel stressed but work through it methodically", {"logical": 15, "emotional": 10})),
    _q(6, "What motivates you most in your work?",
       ("Solving complex problems and challenges", {"analytical": 20, "logical": 10}),
       ("Creating something new and innovative", {"creative": 25, "risk_taking": 5}),
       ("Making a positive impact on people", {"emotional": 20, "collaborative": 15}),
       ("Achieving measurable goals and milestones", {"logical": 15, "analytical": 15})),
    _q(7, "When in a disagreement, you typically:",
       ("Present logical arguments and evidence", {"logical": 20, "analytical": 10}),
       ("Try to understand the other person's perspective", {"emotional": 20, "collaborative": 15}),
       ("Propose creative compromises", {"creative": 15, "collaborative": 15}),
       ("Stand firm on your position if you believe you're right", {"risk_taking": 15, "logical": 10})),
    _q(8, "Your ideal work environment is:",
       ("Quiet, structured, with clear processes", {"logical": 15, "analytical": 15}),
       ("Dynamic, flexible, with room for innovation", {"creative": 20, "risk_taking": 10}),
       ("Collaborative, with lots of team interaction", {"collaborative": 25, "emotional": 10}),
       ("Results-driven, with measurable outcomes", {"analytical": 15, "logical": 10})),
    _q(9, "How do you approach taking risks?",
       ("I embrace risks as opportunities for growth", {"risk_taking": 25, "creative": 5}),
       ("I carefully calculate risks before acting", {"analytical": 20, "logical": 15}),
       ("I prefer to minimize risks whenever possible", {"logical": 10, "emotional": 10}),
       ("I consider how risks might affect others", {"emotional": 15, "collaborative": 15})),
    _q(10, "When working on a creative project, you:",
       ("Start with a detailed plan and structure", {"logical": 15, "analytical": 15}),
       ("Dive in and let ideas flow naturally", {"creative": 25, "risk_taking": 10}),
       ("Collaborate with others for inspiration", {"collaborative": 20, "creative": 10}),
       ("Research extensively before starting", {"analytical": 20, "logical": 10})),
    _q(11, "How do you handle criticism of your work?",
       ("Analyze it objectively for valid points", {"analytical": 20, "logical": 15}),
       ("Take it personally at first but learn from it", {"emotional": 20, "creative": 5}),
       ("Discuss it with the critic to understand better", {"collaborative": 20, "emotional": 10}),
       ("Use it as motivation to improve", {"risk_taking": 10, "creative": 10})),
    _q(12, "What's your approach to long-term planning?",
       ("Create detailed roadmaps with milestones", {"logical": 20, "analytical": 15}),
       ("Have a vision but stay flexible on the path", {"creative": 15, "risk_taking": 15}),
       ("Involve others in shaping the plan", {"collaborative": 20, "emotional": 10}),
       ("Focus on immediate goals that lead to bigger ones", {"analytical": 15, "logical": 10})),
)
