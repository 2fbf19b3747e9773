from marshmallow import EXCLUDE, Schema, fields, validate, post_load

from habit_insights.models.insight import HabitContext, UserContext
from habit_insights.models.ranked_habit import RankedHabit, TIME_TYPES
from habit_insights.utils.time_utils import DAY_CODES, DAY_NAMES


class RankedHabitSchema(Schema):
    
    class Meta:
        unknown = EXCLUDE
    
    id = fields.Str(required=True)
    title = fields.Str(load_default='')
    completed = fields.Bool(load_default=False)
    streak = fields.Int(load_default=0, validate=validate.Range(min=0))
    time_type = fields.Str(allow_none=True, load_default=None, data_key='timeType',
                           validate=validate.OneOf(TIME_TYPES))
    # Left unvalidated: a malformed time only zeroes the proximity term
    specific_time = fields.Str(allow_none=True, load_default=None, data_key='specificTime')
    days_of_week = fields.List(fields.Str(validate=validate.OneOf(DAY_CODES)),
                               allow_none=True, load_default=None, data_key='daysOfWeek')
    
    @post_load
    def make_habit(self, data, **kwargs):
        data['days_of_week'] = frozenset(data.get('days_of_week') or [])
        return RankedHabit(**data)


class HabitContextSchema(Schema):
    
    class Meta:
        unknown = EXCLUDE
    
    id = fields.Str(required=True)
    name = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    completed = fields.Bool(load_default=False)
    streak = fields.Int(load_default=0, validate=validate.Range(min=0))
    difficulty = fields.Str(load_default='medium', validate=validate.OneOf(['easy', 'medium', 'hard']))
    time = fields.Str(allow_none=True, load_default=None)
    
    @post_load
    def make_context(self, data, **kwargs):
        return HabitContext(**data)


class UserContextSchema(Schema):
    
    class Meta:
        unknown = EXCLUDE
    
    current_hour = fields.Int(required=True, data_key='currentHour', validate=validate.Range(min=0, max=23))
    day_of_week = fields.Str(required=True, data_key='dayOfWeek', validate=validate.OneOf(DAY_NAMES))
    completion_rate = fields.Float(required=True, data_key='completionRate',
                                  validate=validate.Range(min=0.0, max=1.0))
    total_habits = fields.Int(load_default=0, data_key='totalHabits', validate=validate.Range(min=0))
    completed_habits = fields.Int(load_default=0, data_key='completedHabits', validate=validate.Range(min=0))
    
    @post_load
    def make_context(self, data, **kwargs):
        return UserContext(**data)
