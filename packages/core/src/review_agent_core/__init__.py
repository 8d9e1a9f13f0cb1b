"""Review orchestration for pull requests: trigger, checkout, tests, prompt, model, publish."""
