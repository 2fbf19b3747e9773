from marshmallow import EXCLUDE, Schema, fields, validate, post_load

from habit_insights.models.completion_record import CompletionRecord, StreakState


class CompletionRecordSchema(Schema):
    class Meta:
        unknown = EXCLUDE
    
    date = fields.Date(required=True)
    completed = fields.Bool(required=True)
    planned = fields.Bool(load_default=True)
    completed_at = fields.DateTime(allow_none=True, load_default=None, data_key='completedAt')
    mood = fields.Str(allow_none=True, load_default=None, validate=validate.Length(max=50))
    
    @post_load
    def make_record(self, data, **kwargs):
        completed_at = data.get('completed_at')
        if completed_at is not None and completed_at.date() != data['date']:
            # Timestamp belongs to another day; keep the date, drop the hour
            data['completed_at'] = None
        return CompletionRecord(**data)


class StreakStateSchema(Schema):
    class Meta:
        unknown = EXCLUDE
    
    current = fields.Int(load_default=0, validate=validate.Range(min=0))
    longest = fields.Int(load_default=0, validate=validate.Range(min=0))
    
    @post_load
    def make_streak(self, data, **kwargs):
        return StreakState(**data)
