"""
Product planning methodology.

Versioned description of how the analysis weighs signals. Served by the API
so that whoever reads a plan can see how the ranking was produced.
"""

METHODOLOGY_VERSION = "2.0"

METHODOLOGY_CONTENT = f"""# Product Planning Methodology v{METHODOLOGY_VERSION}

## Convergent signals come first

The strongest signal is a theme that shows up independently in two places:
support tickets (customers hitting a real problem) and feature requests
(customers asking for something new). Two different customer behaviors point
at the same thing, so convergent themes get a 2x priority boost.

## Two kinds of signals

### Reactive (support tickets)
Pain happening now. Severity indicators:
- Thread count: long back-and-forth means the issue is complex or confusing
  (10 points per message, capped at 50).
- Recency: 30 points decaying with a 7-day time constant, so a spike this
  week outweighs a slow trickle over the quarter.
- Tags: escalation/escalated (30), urgent/critical (25), bug (20). Only the
  strongest tag counts.

### Proactive (feature requests)
What customers say they want. Votes measure breadth and comments measure
depth: vote momentum = votes x 0.8 + comments x 0.2.

High votes with no support tickets is a WANT, not a NEED.

## Scoring formula

```
priority = (frequency x 0.35 + severity x 0.35 + vote_momentum x 0.30)
           x convergence_boost
```

- Frequency (35%): matched signals, relative to the busiest theme.
- Severity (35%): mean reactive severity, capped at 100.
- Vote momentum (30%): relative to the theme with the most momentum.
- Convergence (2x): applied when both signal types are present.

## Emerging themes

Signals that match no configured theme are scanned for repeated two- and
three-word phrases. A phrase that keeps showing up is a hint that the theme
list is missing something. Review them and add keywords when they stick.

## Limits

- It tells you WHAT to prioritize, not HOW to build it.
- It cannot see problems customers do not report.
- Keyword matching is deliberately simple so every match can be audited.
- Business metrics (churn, revenue, usage) are applied as judgment on top of
  the ranking, not calculated by it.
"""
