"""Provider calls, prompts and terminology."""
