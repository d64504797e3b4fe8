"""TalentDesk: candidate pipeline, team hierarchy and recruiter reporting backend."""
